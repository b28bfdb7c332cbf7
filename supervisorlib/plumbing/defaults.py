"""
Default locations for supervisord and its control utility.

Each can be overridden from the environment, or passed explicitly to the functions that use it.
"""

import os


SUPERVISORCTL = os.getenv("SUPERVISORCTL", "supervisorctl")
"""
Control utility used to talk to the running supervisord.
"""

CONF_FILE = os.getenv("SUPERVISOR_CONF_FILE") or None
"""
Main supervisord configuration, passed to `supervisorctl -c` if set.
"""

CONF_DIR = os.getenv("SUPERVISOR_DIR", "/etc/supervisor.d")
"""
Directory included by the main configuration, holding one `<name>.conf` file per program.
"""

LOG_FILE = os.getenv("SUPERVISORD_LOGFILE") or None
"""
supervisord's own log file, shown when a control command has unexpected output.
"""

LOG_TAIL_LINES = 20
"""
Number of trailing log lines to include in failure diagnostics.
"""

CONF_MODE = 0o644
"""
Permissions of program configuration files.
"""
