"""Unit tests for navigation and selection state."""

from yat.models import Location, TaskTree
from yat.navigation import Direction, Navigation


def make_tree():
    return TaskTree(tasks=[
        TaskTree.Task(content="one"),
        TaskTree.Task(content="two", subtasks=[
            TaskTree.SubTask(content="two.a"),
            TaskTree.SubTask(content="two.b"),
            TaskTree.SubTask(content="two.c"),
        ]),
        TaskTree.Task(content="three"),
    ])


class TestInitialState:
    """Test Navigation.for_tree."""

    def test_non_empty_tree_selects_first(self):
        """Test the first task starts selected."""
        nav = Navigation.for_tree(make_tree())
        assert nav.at_root
        assert nav.selected_root == 0
        assert nav.selected_child is None
        assert nav.location == Location(root=0)

    def test_empty_tree_has_no_selection(self):
        """Test an empty tree has nothing selected."""
        nav = Navigation.for_tree(TaskTree())
        assert nav.selected_root is None
        assert nav.location is None


class TestMoveSelection:
    """Test saturating selection movement."""

    def test_down_then_saturate(self):
        """Test moving down stops at the last task."""
        tree = make_tree()
        nav = Navigation.for_tree(tree)
        assert nav.move_selection(Direction.DOWN, tree)
        assert nav.move_selection(Direction.DOWN, tree)
        assert nav.selected_root == 2
        assert not nav.move_selection(Direction.DOWN, tree)
        assert nav.selected_root == 2

    def test_up_at_top_does_not_wrap(self):
        """Test moving up stops at the first task."""
        tree = make_tree()
        nav = Navigation.for_tree(tree)
        assert not nav.move_selection(Direction.UP, tree)
        assert nav.selected_root == 0

    def test_moves_child_index_when_focused(self):
        """Test moving inside a focused parent."""
        tree = make_tree()
        nav = Navigation(selected_root=1)
        nav.focus_in(tree)
        nav.move_selection(Direction.DOWN, tree)
        assert nav.selected_child == 1
        assert nav.selected_root == 1
        assert nav.location == Location(root=1, child=1)

    def test_empty_tree(self):
        """Test moving on an empty tree."""
        tree = TaskTree()
        nav = Navigation.for_tree(tree)
        assert not nav.move_selection(Direction.DOWN, tree)
        assert nav.selected_root is None


class TestFocus:
    """Test focusing in and out of sub-task lists."""

    def test_focus_in_task_with_children(self):
        """Test focusing into a task with sub-tasks."""
        tree = make_tree()
        nav = Navigation(selected_root=1)
        assert nav.focus_in(tree)
        assert nav.focus == 1
        assert nav.selected_child == 0

    def test_focus_in_childless_task_is_noop(self):
        """Test focusing into a task without sub-tasks."""
        tree = make_tree()
        nav = Navigation(selected_root=0)
        assert not nav.focus_in(tree)
        assert nav.at_root
        assert nav.selected_child is None

    def test_focus_in_twice_is_noop(self):
        """Test that a focused sub-task list cannot be entered further."""
        tree = make_tree()
        nav = Navigation(selected_root=1)
        nav.focus_in(tree)
        nav.move_selection(Direction.DOWN, tree)
        assert not nav.focus_in(tree)
        assert nav.focus == 1
        assert nav.selected_child == 1

    def test_focus_out(self):
        """Test going back to the top level."""
        tree = make_tree()
        nav = Navigation(selected_root=1)
        nav.focus_in(tree)
        assert nav.focus_out()
        assert nav.at_root
        assert nav.selected_root == 1
        assert nav.selected_child is None

    def test_focus_out_at_root_is_noop(self):
        """Test going back from the top level."""
        nav = Navigation.for_tree(make_tree())
        assert not nav.focus_out()
        assert nav.selected_root == 0


class TestReclamp:
    """Test selection repair after deletions."""

    def test_delete_last_selects_new_last(self):
        """Test removing the last task selects the new last one."""
        tree = make_tree()
        nav = Navigation(selected_root=2)
        tree.delete(nav.location)
        nav.reclamp(tree)
        assert nav.selected_root == 1

    def test_delete_middle_keeps_index(self):
        """Test removing a middle task keeps the index."""
        tree = make_tree()
        nav = Navigation(selected_root=1)
        tree.delete(nav.location)
        nav.reclamp(tree)
        assert nav.selected_root == 1
        assert tree.tasks[nav.selected_root].content == "three"

    def test_delete_only_task_clears_selection(self):
        """Test removing the only task."""
        tree = TaskTree(tasks=[TaskTree.Task(content="solo")])
        nav = Navigation.for_tree(tree)
        tree.delete(nav.location)
        nav.reclamp(tree)
        assert nav.selected_root is None
        assert nav.location is None

    def test_delete_last_child_returns_to_root(self):
        """Test removing the only sub-task returns to the top level."""
        tree = TaskTree(tasks=[
            TaskTree.Task(content="parent", subtasks=[TaskTree.SubTask(content="only child")]),
        ])
        nav = Navigation(selected_root=0)
        nav.focus_in(tree)
        tree.delete(nav.location)
        nav.reclamp(tree)
        assert nav.at_root
        assert nav.selected_root == 0
        assert nav.selected_child is None

    def test_delete_last_of_several_children(self):
        """Test removing the last of several sub-tasks."""
        tree = make_tree()
        nav = Navigation(selected_root=1)
        nav.focus_in(tree)
        nav.select(2, tree)
        tree.delete(nav.location)
        nav.reclamp(tree)
        assert nav.focus == 1
        assert nav.selected_child == 1

    def test_deleting_focused_parent_clears_everything(self):
        """Test removing the only root task while focused on its sub-tasks."""
        tree = TaskTree(tasks=[
            TaskTree.Task(content="parent", subtasks=[
                TaskTree.SubTask(content="a"),
                TaskTree.SubTask(content="b"),
            ]),
        ])
        nav = Navigation(selected_root=0)
        nav.focus_in(tree)
        nav.select(1, tree)
        tree.delete(Location(root=0))
        nav.reclamp(tree)
        assert nav.at_root
        assert nav.selected_root is None
        assert nav.selected_child is None

    def test_select_clamps(self):
        """Test selecting past the end."""
        tree = make_tree()
        nav = Navigation.for_tree(tree)
        nav.select(10, tree)
        assert nav.selected_root == 2
        nav.select(-3, tree)
        assert nav.selected_root == 0
