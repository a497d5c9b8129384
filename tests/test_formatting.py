from studybot.features.study_sessions.formatting import (
    format_total_time,
    leaderboard_medal,
    render_heatmap,
)


def test_format_total_time():
    assert format_total_time(0) == "0 minutes"
    assert format_total_time(1) == "1 minute"
    assert format_total_time(60) == "1 hour"
    assert format_total_time(125.5) == "2 hours 5 minutes"


def test_leaderboard_medals():
    assert [leaderboard_medal(i) for i in range(5)] == ["🥇", "🥈", "🥉", "4.", "5."]


def test_heatmap_grid_shape_and_shading():
    # Four hours of 60 min/hr on Monday morning, 40 min in one Sunday hour
    data = {"Mon-8": 60, "Mon-9": 60, "Mon-10": 60, "Mon-11": 60, "Sun-0": 40}

    rendered = render_heatmap(data)
    lines = rendered.split("\n")
    grid = lines[lines.index("```") + 2:lines.index("```") + 8]

    assert len(grid) == 6
    assert grid[2].startswith("8am-12pm")
    assert grid[2].split()[2] == "⬛"  # Mon column
    assert grid[0].split()[1] == "🟦"  # Sun, 40 min spread over a 4-hour block
    assert "Legend:" in rendered
