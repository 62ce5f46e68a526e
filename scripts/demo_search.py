#!/usr/bin/env python3
"""
fuzzyrank Demo - Demonstrates key functionality.
"""

import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from config.logging_setup import setup_logging
from fuzzyrank import SearchEngine, describe_result

SAMPLE_RECORDS = [
    {
        "slug": "binary-search", "title": "Binary Search", "topic": "searching",
        "summary": "Find an item in a sorted array by halving the search interval.",
        "about": "Divide and conquer search on sorted data.",
        "pros": ["fast", "logarithmic"], "cons": ["requires sorted input"],
        "complexity": {"time": {"best": "O(1)", "average": "O(log n)", "worst": "O(log n)"},
                       "space": "O(1)", "stable": True, "inPlace": True},
    },
    {
        "slug": "linear-search", "title": "Linear Search", "topic": "searching",
        "summary": "Check every element in order until the target is found.",
        "pros": ["simple"], "cons": ["slow on large inputs"],
        "complexity": {"time": {"average": "O(n)"}, "space": "O(1)", "stable": True, "inPlace": True},
    },
    {
        "slug": "merge-sort", "title": "Merge Sort", "topic": "sorting",
        "summary": "Stable divide and conquer sort that merges sorted halves.",
        "pros": ["stable", "predictable"], "cons": ["extra memory"],
        "complexity": {"time": {"average": "O(n log n)"}, "space": "O(n)", "stable": True, "inPlace": False},
    },
    {
        "slug": "quick-sort", "title": "Quick Sort", "topic": "sorting",
        "summary": "Partition around a pivot and recursively sort the parts.",
        "pros": ["fast in practice"], "cons": ["unstable", "worst case quadratic"],
        "complexity": {"time": {"average": "O(n log n)", "worst": "O(n^2)"}, "space": "O(log n)",
                       "stable": False, "inPlace": True},
    },
    {
        "slug": "bfs", "title": "Breadth First Search", "topic": "graphs",
        "summary": "Visit graph nodes level by level using a queue.",
        "pros": ["shortest path in unweighted graphs"], "cons": ["memory heavy"],
        "complexity": {"time": {"average": "O(V + E)"}, "space": "O(V)"},
    },
]


def demo_search():
    """Demonstrate key SearchEngine features."""

    print("🚀 **fuzzyrank Feature Demonstration**")
    print("=" * 60)

    engine = SearchEngine()
    documents = engine.ingest(SAMPLE_RECORDS)
    print(f"   Indexed {len(documents)} documents")

    # Demo 1: Ranking strategies
    print("\n1. 🔍 **Query Demo**")
    for query in ["Binary Search", "Bin", "bfs", "search linear", "fast sort", "sercah"]:
        results = engine.query(query, documents)
        print(f"   Query: '{query}'")
        for result in results[:3]:
            print(f"   → {result.document.title} ({result.kind.value}, {result.score:.3f}): {describe_result(result)}")

    # Demo 2: Typo correction
    print("\n2. 🔤 **Did You Mean Demo**")
    print(f"   'mrege' → {engine.did_you_mean('mrege', documents)}")

    # Demo 3: Personalization
    print("\n3. 👤 **Personalization Demo**")
    engine.record_selection("sort", documents[2])
    print(f"   → Context suggestions: {engine.context_suggestions()}")

    # Demo 4: Analytics
    print("\n4. 📊 **Analytics Demo**")
    engine.query("Binary Search", documents)
    insights = engine.analytics_snapshot()
    print(f"   → Total queries: {insights.total_queries}")
    print(f"   → Success rate: {insights.success_rate}%")
    print(f"   → Cache: {engine.cache_stats().to_dict()}")
    print(f"   → Suggestions for 'sea': {engine.suggestions('sea')}")

    # Demo 5: Monitoring
    print("\n5. ⏱️ **Performance Demo**")
    report = engine.performance_report()
    print(f"   → Average search time: {report.avg_search_time}ms")
    print(f"   → Cache hit rate: {report.cache_hit_rate}%")
    print(f"   → Success metrics: {engine.success_metrics().to_dict()}")

    print("\n" + "=" * 60)
    print("🎉 **fuzzyrank Demo Complete!**")


if __name__ == "__main__":
    setup_logging()
    demo_search()
