"""YMCA performance scoring and advisory engine.

Two layers:
- Scoring: survey responses -> metric scores -> PerformanceSnapshot
- Advisory: specialized advisors run against a completion service, with
  deterministic rule-based fallback, merged into a ComprehensiveAnalysis

Usage:
    from ymca_advisory.service import AdvisoryService

    service = AdvisoryService.from_settings(load_settings())
    analysis = asyncio.run(service.analyze(submission))
"""

__version__ = "0.1.0"
