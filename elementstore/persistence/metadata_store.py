import json
import logging
from pathlib import Path
from typing import List, Optional

from elementstore.errors import MetadataDecodeError
from elementstore.metadata.description import ClassDescription, decode_description, describe

logger = logging.getLogger(__name__)


# ==============================================
# MetadataStore
# ==============================================
#
# PURPOSE:
#   Persist class descriptions to disk, explicitly and separately
#   from element state. Element state goes through a StorageAdapter
#   under the element's identifier; class descriptions never do.
#
# WHY THIS CLASS EXISTS:
#   A description captured today lets a later process see which
#   methods an older version of a type declared, or scaffold a
#   skeleton class from it, without the original type loaded.
#
# CLASS: MetadataStore
# --------------------
#   Stateful — holds a reference to the storage directory.
#
#   Constructor:
#   ------------
#   - __init__(storage_dir: str = "metadata/")
#       Create storage directory if it doesn't exist.
#
class MetadataStore:
    """
    Handles persistence of class descriptions to disk.

    Files created:
    - metadata/<ClassName>.json  → {className, properties, methods}
    """

    def __init__(self, storage_dir: str = "metadata/"):
        """
        Initialize the metadata store.

        Args:
            storage_dir: Directory to store description files
        """
        self.storage_dir = Path(storage_dir)
        self.storage_dir.mkdir(parents=True, exist_ok=True)

    def path_for(self, class_name: str) -> Path:
        if not class_name.isidentifier():
            raise ValueError(f"{class_name!r} is not a valid class name")
        return self.storage_dir / f"{class_name}.json"

#   Methods:
#   --------
#   - save_description(cls) -> Path
#       Describe cls and write the description to <className>.json.
#
#   - load_description(class_name) -> ClassDescription | None
#       Read a description back. None if no file exists.
#
    def save_description(self, cls: type) -> Path:
        """
        Describe cls and save the description to disk.

        Args:
            cls: The type to describe

        Returns:
            Path of the written file
        """
        description = describe(cls)
        path = self.path_for(description.class_name)

        with open(path, "w") as f:
            json.dump(description.to_dict(), f, indent=2)

        logger.info(
            "Saved description of %s (%d properties, %d methods) to %s",
            description.class_name, len(description.properties), len(description.methods), path,
        )
        return path

    def load_description(self, class_name: str) -> Optional[ClassDescription]:
        """
        Load a class description from disk.

        Returns:
            ClassDescription, or None if no file exists for class_name

        Raises:
            MetadataDecodeError: The file exists but is malformed
        """
        path = self.path_for(class_name)
        if not path.exists():
            logger.debug("No description file found at %s", path)
            return None

        with open(path, "r") as f:
            text = f.read()

        description = decode_description(text)
        if description.class_name != class_name:
            raise MetadataDecodeError(
                f"{path} describes {description.class_name!r}, expected {class_name!r}"
            )
        return description

#   UTILITY:
#   - list_descriptions() -> list[str]
#   - exists() -> bool
#   - clear() -> None
#
    def list_descriptions(self) -> List[str]:
        """Class names with a saved description, sorted."""
        return sorted(path.stem for path in self.storage_dir.glob("*.json"))

    def exists(self) -> bool:
        """True if any description has been saved."""
        return any(self.storage_dir.glob("*.json"))

    def clear(self) -> None:
        """Delete all description files (for testing or reset)."""
        for path in self.storage_dir.glob("*.json"):
            path.unlink()
            logger.info("Deleted %s", path)
