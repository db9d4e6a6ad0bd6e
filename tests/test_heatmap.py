from datetime import timezone

from helpers import NOW, ago, completed, created, make_task, source_of
from task_analytics.heatmap import activity_heatmap, heatmap_points
from task_analytics.trends import completion_trends


def sample_source():
    tasks = [
        make_task("a"),
        make_task("b"),
        make_task("c"),
        make_task("d"),
        make_task("theirs", creator="alice", assignee="bob"),
    ]
    history = [
        completed("a", ago(days=1)),
        completed("b", ago(days=1, hours=1)),
        completed("c", ago(days=3)),
        completed("d", ago(days=100)),
        completed("theirs", ago(days=2)),
        created("a", ago(days=1)),
    ]
    return source_of(tasks, history)


def test_heatmap_omits_empty_dates():
    heatmap = activity_heatmap(sample_source(), "alice", "personal", NOW)
    assert heatmap == {"2025-01-14": 2, "2025-01-12": 1}


def test_global_heatmap_includes_all_assignees():
    heatmap = activity_heatmap(sample_source(), "alice", "global", NOW)
    assert heatmap["2025-01-13"] == 1
    assert sum(heatmap.values()) == 4


def test_heatmap_and_trends_disagree_on_empty_days():
    source = sample_source()
    heatmap = activity_heatmap(source, "alice", "personal", NOW)
    trends = completion_trends(source, "alice", "personal", 7, NOW, timezone.utc)
    assert len(trends) == 7
    assert any(point.completed_count == 0 for point in trends)
    assert all(count > 0 for count in heatmap.values())


def test_empty_heatmap():
    assert activity_heatmap(source_of(), "alice", "personal", NOW) == {}


def test_heatmap_points_sorted_by_date():
    points = heatmap_points({"2025-01-14": 2, "2025-01-12": 1})
    assert [p.to_dict() for p in points] == [{"date": "2025-01-12", "count": 1}, {"date": "2025-01-14", "count": 2}]


def test_heatmap_window_includes_both_ends():
    history = [
        completed("a", NOW),
        completed("b", ago(days=90)),
        completed("c", ago(days=90, hours=1)),
    ]
    source = source_of([make_task("a"), make_task("b"), make_task("c")], history)
    assert activity_heatmap(source, "alice", "personal", NOW) == {"2025-01-15": 1, "2024-10-17": 1}
