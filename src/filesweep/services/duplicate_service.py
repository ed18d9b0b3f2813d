from typing import Iterable, List, Tuple

from filesweep.core.models import DuplicateGroup, LargeFileEntry


class DuplicateService:
    @staticmethod
    def remove_paths_from_groups(groups: List[DuplicateGroup], file_paths: Iterable[str]) -> List[DuplicateGroup]:
        """
        Removes the given paths from every duplicate group.

        Groups left with fewer than 2 members are discarded, the rest keep
        their member order.

        Args:
            groups (list[DuplicateGroup]): Duplicate groups to update.
            file_paths (Iterable[str]): Paths to remove.

        Returns:
            list[DuplicateGroup]: Updated list of duplicate groups.
        """
        removed = set(file_paths)
        updated_groups = []
        for group in groups:
            members = [p for p in group.members if p not in removed]
            if len(members) >= 2:
                updated_groups.append(DuplicateGroup(key=group.key, members=members))
        return updated_groups

    @staticmethod
    def remove_paths_from_entries(entries: List[LargeFileEntry], file_paths: Iterable[str]) -> List[LargeFileEntry]:
        removed = set(file_paths)
        return [e for e in entries if e.path not in removed]

    @staticmethod
    def keep_only_one_file_per_group(groups: List[DuplicateGroup]) -> Tuple[List[str], List[DuplicateGroup]]:
        """
        Keeps the first member of each group and marks the rest for deletion.
        Returns:
            - List of file paths to be deleted
            - Updated list of duplicate groups
        """
        files_to_delete = []
        for group in groups:
            files_to_delete.extend(group.members[1:])

        updated_groups = DuplicateService.remove_paths_from_groups(groups, files_to_delete)
        return files_to_delete, updated_groups
