# kamino_sim/patterns.py
GLOBAL_ITEM = "global:common"


class DataAccessPatternGenerator:
    """
    Maps an integer id to the deterministic set of data items it needs.

    Ids that fall in the same group (``id // group_stride``) share
    ``group_items`` items, every id owns ``units_per_id`` unit sub-ids with
    ``unit_items`` items each, and all ids share one global item.
    """
    def __init__(self, group_stride: int, units_per_id: int,
                 group_items: int = 5, unit_items: int = 2):
        if group_stride <= 0 or units_per_id <= 0:
            raise ValueError("group_stride and units_per_id must be positive")
        self.group_stride = group_stride
        self.units_per_id = units_per_id
        self.group_items  = group_items
        self.unit_items   = unit_items

    def pattern(self, ident: int) -> frozenset:
        group = ident // self.group_stride
        items = {f"group:{group}:item:{i}" for i in range(self.group_items)}

        first_unit = ident * self.units_per_id
        for sub in range(first_unit, first_unit + self.units_per_id):
            items.update(f"unit:{sub}:item:{i}" for i in range(self.unit_items))

        items.add(GLOBAL_ITEM)
        return frozenset(items)

    __call__ = pattern


def vm_patterns(group_stride: int = 2) -> DataAccessPatternGenerator:
    # two unit sub-ids per VM: one per task it hosts
    return DataAccessPatternGenerator(group_stride, units_per_id=2)


def task_patterns(group_stride: int = 4) -> DataAccessPatternGenerator:
    return DataAccessPatternGenerator(group_stride, units_per_id=1)


def group_items(group: int, count: int = 5) -> list:
    """Items shared by a whole group, in item order (used for pre-warming)."""
    return [f"group:{group}:item:{i}" for i in range(count)]
