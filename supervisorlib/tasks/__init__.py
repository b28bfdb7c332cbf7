"""
Higher-level methods to manage supervised programs.

Each public function in this module should:

- perform a complete task, as needed by a script or an orchestration layer
- query supervisord for the current state before acting, and do nothing if it already matches
- verify every change against supervisord's own report of the outcome
"""
