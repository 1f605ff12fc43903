from .patient_router import *
