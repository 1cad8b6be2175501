from vidshelf.app_factory import create_app
from vidshelf.models.config import config

app = create_app()

if __name__ == "__main__":
    app.run(host=config.app_host, port=config.app_port, debug=config.debug)
