from .patient_mapper import *
from .patient_service import *
