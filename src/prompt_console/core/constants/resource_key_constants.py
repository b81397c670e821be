"""Constants for localized resource keys and resource files.

User-facing text never lives in code; these are the keys looked up through the
localization service.
"""

# Resource file holding the console's own strings
PROMPT_RESOURCE_FILE = "prompt.resources.yaml"

# Dispatcher messages
COMMAND_NOT_FOUND_KEY = "CommandNotFound"
DID_YOU_MEAN_KEY = "DidYouMean"
INVALID_COMMAND_KEY = "Prompt_InvalidCommand"

# Help topics
HELP_SYNTAX_KEY = "Prompt_CommandHelpSyntax"
HELP_LEARN_KEY = "Prompt_CommandHelpLearn"

# Shared command messages
ONLY_ONE_FLAG_REQUIRED_KEY = "Prompt_OnlyOneFlagRequired"
