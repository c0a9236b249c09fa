"""Command-line interface modules for radsgen conversion runs.

This package contains core execution logic, making scripts/ optional and deletable.
"""

from radsgen.cli.run_l1r import main, run_l1r_conversion

__all__ = ['main', 'run_l1r_conversion']
