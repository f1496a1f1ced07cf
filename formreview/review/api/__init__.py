"""
Review store, aggregation engine, visibility policy engine and the review
query facade. `services` wires them together and exposes the public calls.
"""
