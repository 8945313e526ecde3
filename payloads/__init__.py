# =============================================================================
# payloads/ - Model Definitions (Data Shapes)
# =============================================================================
# One module per model type. Each module declares the pydantic model that
# records of that type are decoded into. A module here is registered only
# when validations/ has a module with the same name:
#
#   payloads/incident.py   <->  validations/incident.py   -> /validate/incident
#
# Shape classes are found by name (IncidentPayload, IncidentModel, ...) or,
# failing that, by scanning the module for declared pydantic models.
# =============================================================================
