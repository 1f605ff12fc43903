from .patient_repository import *
