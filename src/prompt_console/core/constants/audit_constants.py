"""Constants for audit log records written by the dispatcher."""

AUDIT_LOG_TYPE = "PROMPT_ALERT"

AUDIT_PROPERTY_COMMAND = "Command"
AUDIT_PROPERTY_IS_VALID = "IsValid"
AUDIT_PROPERTY_TYPE_NAME = "TypeFullName"
AUDIT_PROPERTY_OUTPUT = "Output"
AUDIT_PROPERTY_RECORDS = "RecordsAffected"
AUDIT_PROPERTY_EXECUTION_TIME = "ExecutionTime(hh:mm:ss)"
