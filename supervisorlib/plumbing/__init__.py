"""
Low-level APIs for driving supervisord.

Each public function in this module should:

- perform a single action, idempotently if possible
- raise an exception on any failures
- accept a control client or paths as arguments rather than hard-coding their own

Each function also falls into one of two groups:

- getters (prefixed with `get_`, returns a value directly, does not modify state)
- actions (returns a `Result` object, may modify state)
"""
