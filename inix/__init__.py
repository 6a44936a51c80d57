"""inix -- a project-scaffolding engine.

Fetches a template (git repository or local directory), asks the template's
questions and renders every template file into a new project directory.
"""

__version__ = "0.1.0"
