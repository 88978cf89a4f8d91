"""WellnessWay directory app.

Pages, session handling and API wrappers for browsing medical shops and
hospitals and for managing an owner's own listing on the directory API.
"""
