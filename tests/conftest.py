import os

from dynpack.conf import CONFIG_YAML_ENV_VAR
from dynpack.utils.log import LoggingOutput, setup_logging

UNITTESTS_SETTINGS_FILEPATH = os.path.join(os.path.dirname(__file__), 'unittests.yml')

os.environ[CONFIG_YAML_ENV_VAR] = os.environ.get('DYNPACK_TEST_CONFIG_YAML', UNITTESTS_SETTINGS_FILEPATH)

# XXX: structlog prints to stdout by default, which would leak into doctest outputs
setup_logging(logging_output=LoggingOutput.PRETTY, debug=True)
