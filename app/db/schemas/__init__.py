from .api_response import *
from .patient_schema import *
