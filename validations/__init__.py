# =============================================================================
# validations/ - Validator Definitions
# =============================================================================
# One module per model type, named after its payloads/ counterpart.
# Each module exposes a validator class (<Title>Validator) or a factory
# (new_<name>_validator) that discovery instantiates with no arguments.
#
# Validators built on BaseValidator implement validate_payload(record) and
# return a ValidationResult.
# =============================================================================
