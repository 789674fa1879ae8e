"""Built-in pair-programming scenario: three students solving two_sum together."""

from typing import List

from collab.core.state import Actor, Cursor
from collab.script.steps import ChatStep, DeleteStep, Script, Step, TypeStep, build_script


def default_actors() -> List[Actor]:
    return [
        Actor(
            id="sarah",
            name="Sarah Chen",
            avatar="https://images.unsplash.com/photo-1494790108755-2616b612b2d3?w=400&h=400&fit=crop&crop=face",
            color="#10b981",
            affiliation="MIT",
        ),
        Actor(
            id="alex",
            name="Alex Rivera",
            avatar="https://images.unsplash.com/photo-1507003211169-0a1dd7228f2d?w=400&h=400&fit=crop&crop=face",
            color="#3b82f6",
            affiliation="Stanford",
        ),
        Actor(
            id="jordan",
            name="Jordan Kim",
            avatar="https://images.unsplash.com/photo-1517841905240-472988babdf9?w=400&h=400&fit=crop&crop=face",
            color="#f59e0b",
            affiliation="UC Berkeley",
        ),
    ]


def default_steps() -> List[Step]:
    return [
        ChatStep("sarah", 800, "Let me optimize this for O(n) time complexity"),
        TypeStep("sarah", 600, "def two_sum(nums, target):\n", Cursor(12, 22)),
        TypeStep("sarah", 400, "    for i in range(len(nums)):\n        for j in range(i + 1, len(nums)):\n", Cursor(18, 30)),
        ChatStep("alex", 900, "Nested loops are O(n^2). Using a hash map?"),
        DeleteStep("sarah", 700, "    for i in range(len(nums)):\n        for j in range(i + 1, len(nums)):\n", Cursor(18, 30)),
        ChatStep("sarah", 500, "Exactly! Store complements as we iterate"),
        TypeStep("sarah", 400, "    seen = {}\n    for i, num in enumerate(nums):\n", Cursor(20, 34)),
        TypeStep("sarah", 300, "        complement = target - num\n        if complement in seen:\n", Cursor(26, 42)),
        TypeStep("sarah", 300, "            return [seen[complement], i]\n", Cursor(30, 50)),
        TypeStep("alex", 900, "        seen[num] = i  # Store the index\n", Cursor(28, 58)),
        TypeStep("alex", 300, "    return []\n", Cursor(16, 64)),
        ChatStep("jordan", 1000, "Should we add some test cases too?"),
        TypeStep("jordan", 600, "\n# two_sum([2, 7, 11, 15], 9) -> [0, 1]\n# two_sum([3, 2, 4], 6) -> [1, 2]\n", Cursor(22, 78)),
        ChatStep("alex", 800, "Looks good, running it now"),
    ]


def build_default_script() -> Script:
    return build_script("two_sum.py", default_actors(), default_steps())
