"""Allow running escalator as a module: python -m escalator"""

from escalator.main import run

run()
