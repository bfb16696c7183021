"""Course lifecycle workflow manager.

Associates courses with administrator-defined workflows, gated by
triggers, and manages their activation, ordering and running processes.
"""

__version__ = "0.1.0"
