"""Services Layer — read → authorize → write sequences over an AsyncSession.

Invariants:
    - Every mutation decision is delegated to core/ policy functions
    - Policy errors are raised before anything is added to or deleted from the session
"""
