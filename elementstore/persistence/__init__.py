# ==============================================
# PERSISTENCE (class descriptions on disk)
# ==============================================
#
# Saving a class description is an explicit, caller-driven step.
# Element state is never written here.
#
# Modules:
# --------
# - metadata_store.py  → Save/load class descriptions as JSON files
#
# ==============================================

from .metadata_store import MetadataStore

__all__ = ["MetadataStore"]
