import os

# The test suite runs against the builtin "testing" configuration.
os.environ.setdefault("SWIFTBULK_ENV", "testing")
