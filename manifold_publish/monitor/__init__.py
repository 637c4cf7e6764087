"""Terminal reporting for publish runs.

Modules
-------
renderer
    ``PublishRenderer`` prints the stage-by-stage narrative as a run
    progresses and a summary or error panel once it ends.
"""
