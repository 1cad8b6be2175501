from flask_sqlalchemy import SQLAlchemy

from .video import *
from .playlist import *
from .snapshot import *

from .base import Base

db = SQLAlchemy(model_class=Base)
