from typing import Dict, List, Optional


class TaggingService:
    """
    Tag sets keyed by resource ARN. Keys are unique per resource, re-tagging a key overwrites its value.
    """

    def __init__(self, key_field: str = None, value_field: str = None):
        """
        :param key_field: the field name representing the tag key as used by botocore specs
        :param value_field: the field name representing the tag value as used by botocore specs
        """
        self.key_field = key_field or "Key"
        self.value_field = value_field or "Value"

        self.tags: Dict[str, Dict[str, str]] = {}

    def list_tags_for_resource(self, arn: str, root_name: Optional[str] = None):
        root_name = root_name or "Tags"

        result = []
        if arn in self.tags:
            for k, v in self.tags[arn].items():
                result.append({self.key_field: k, self.value_field: v})
        return {root_name: result}

    def tag_resource(self, arn: str, tags: List[Dict[str, str]]):
        if not tags:
            return
        if arn not in self.tags:
            self.tags[arn] = {}
        for t in tags:
            self.tags[arn][t[self.key_field]] = t.get(self.value_field) or ""

    def untag_resource(self, arn: str, tag_names: List[str]):
        tags = self.tags.get(arn, {})
        for name in tag_names:
            tags.pop(name, None)

    def count_tags(self, arn: str, tags: List[Dict[str, str]] = None) -> int:
        """Number of distinct keys the resource would carry after applying the given tags."""
        keys = set(self.tags.get(arn, {}))
        keys.update(t[self.key_field] for t in tags or [])
        return len(keys)

    def del_resource(self, arn: str):
        if arn in self.tags:
            del self.tags[arn]

    def __delitem__(self, arn: str):
        self.del_resource(arn)
