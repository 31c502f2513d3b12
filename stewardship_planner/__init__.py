"""Top-level package for the Stewardship Planner.

The planner splits a paycheck across purpose-driven accounts and projects
bills, debts, savings goals and a financial calendar.  The primary modules
are:

* ``frequency`` - conversion of recurring amounts to monthly equivalents
* ``budget`` - allocation summary, validation and recommendations
* ``cashflow`` - per-account inflow versus bill outflow
* ``debts`` - snowball and avalanche payoff simulation
* ``goals`` - savings goal progress
* ``calendar_events`` - unified calendar of recurring events
* ``storage`` - JSON data store the dashboard reads from
* ``dashboard`` - a Streamlit app that ties everything together

To run the dashboard from the command line you can execute:

```bash
streamlit run stewardship_planner/dashboard.py
```
"""

from . import budget  # noqa: F401  # re-exported for convenience
from . import calendar_events  # noqa: F401
from . import cashflow  # noqa: F401
from . import debts  # noqa: F401
from . import frequency  # noqa: F401
from . import goals  # noqa: F401
from .errors import InvalidFrequency, StewardshipError, StorageError, UnpayableDebt  # noqa: F401

__version__ = "0.1.0"

__all__ = [
    "budget",
    "calendar_events",
    "cashflow",
    "debts",
    "frequency",
    "goals",
    "InvalidFrequency",
    "StewardshipError",
    "StorageError",
    "UnpayableDebt",
]
