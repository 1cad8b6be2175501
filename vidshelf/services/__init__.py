from .library import LibraryService
