"""Divine Admin: curate the gods and songs catalog consumed by the mobile app."""
