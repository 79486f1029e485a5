"""
Operator Invocation.

Schema-driven invocation of operator plugins: fetch an operator's schema,
validate and convert user arguments against it, and dispatch the trigger.
"""
