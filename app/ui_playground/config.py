"""Configuration for the Playground UI.

Page settings for the Streamlit session.
"""

PAGE_TITLE = "DCQL Playground"
PAGE_ICON = "🔎"

# Editor heights in pixels
QUERY_EDITOR_HEIGHT = 420
RECORDS_EDITOR_HEIGHT = 420

# Streamlit reruns the script once per committed widget edit and has no
# event loop to host a timer, so the session evaluates synchronously.
UI_QUIET_PERIOD = 0

# Session state keys
STORE_KEY = "playground_store"
QUERY_EDITOR_KEY = "query_editor"
RECORDS_EDITOR_KEY = "records_editor"
SETS_EDITOR_KEY = "credential_sets_editor"
