"""Document collection names.

Both store backends create collections on first write; these constants are
the single source of truth for their names.
"""

COLLECTION_USERS = "users"
COLLECTION_PROVIDERS = "providers"
COLLECTION_SERVICES = "services"
COLLECTION_BOOKINGS = "bookings"

# Fields whose value must be unique within a collection (one Provider per User)
UNIQUE_FIELDS = {
    COLLECTION_PROVIDERS: "uid",
}
