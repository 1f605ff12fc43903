from .middleware_types import *
from .logger_middleware import *
