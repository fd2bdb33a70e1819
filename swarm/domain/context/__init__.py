# This module handles the shared context threaded through a run

# +---------------------+
# |   Caller context    |   (Supplied once, deep-copied at run start)
# +---------------------+
#         |
#         v
# +------------------------------+
# |        Run context           |   (Owned by exactly one run)
# |------------------------------|
# | Read by instruction funcs    |
# | Read by capabilities         |
# | Updated by Result.context_   |
# |   variables after each turn  |
# +------------------------------+
#         |
#         v
#   [Response.context_variables]

from .context_variables import CONTEXT_VARIABLES_NAME, get_context_value, merge_context

__all__ = ["CONTEXT_VARIABLES_NAME", "get_context_value", "merge_context"]
