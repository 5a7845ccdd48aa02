"""funcstack - Function constructs for declarative deployment templates.

Turns declarative function definitions into template nodes:
- Props merging against per-unit defaults
- Build mode dispatch (live bridge / skip build / deferred build)
- Deferred builds drained once per deployment pass
- Cross-unit layer references routed through SSM parameters
"""

__version__ = "0.1.0"
