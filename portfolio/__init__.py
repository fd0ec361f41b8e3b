"""Personal portfolio builder: profile, projects, skills, wizard and resume."""

__version__ = "1.0.0"
