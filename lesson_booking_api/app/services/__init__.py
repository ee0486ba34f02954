"""
Service layer.

Repositories wrap the document store with typed accessors for lessons
and orders; ``FulfillmentService`` builds the reconciliation workflow on
top of them.  All of them receive their collaborators through the
constructor so request handlers (and tests) decide which store they
run against.
"""
