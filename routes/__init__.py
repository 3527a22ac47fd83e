from .birds import bird_bp
from .pages import pages_bp
