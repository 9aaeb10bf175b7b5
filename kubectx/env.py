"""Names of environment variables that change how the tools behave."""

# Set to disable interactive selection even when fzf is installed.
FZF_IGNORE = "KUBECTX_IGNORE_FZF"

# Set to disable colored output.
NO_COLOR = "NO_COLOR"

# Internal variable that forces colored output, e.g. when piped into fzf.
FORCE_COLOR = "_KUBECTX_FORCE_COLOR"

# Internal variable that enables more verbose error reporting.
DEBUG = "DEBUG"