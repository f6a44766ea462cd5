"""Session bootstrap for a Streamlit touch UI.

On the first run of every browser session the app loads a script resource
(``clotouch.py`` by default) and hands the session's :class:`UISession` to
the script's ``main`` function. The script builds the actual UI.
"""
