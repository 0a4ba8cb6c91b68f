"""
Service layer abstraction.

Each service encapsulates the data access for one entity or one
store-wide concern (lifecycle, bulk transfer).  Services receive the
connection handle explicitly so API handlers, startup code and tests
can each decide which database they operate on.
"""
