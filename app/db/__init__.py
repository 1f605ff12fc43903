from .db_manager import *
from .deps import *
