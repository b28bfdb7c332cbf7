"""
Client-side management of programs supervised by supervisord.
"""
