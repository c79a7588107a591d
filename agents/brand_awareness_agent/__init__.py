"""
Brand Awareness Agent

A LangGraph workflow that generates brand awareness queries, runs them
across AI providers, scores and aggregates the answers.
"""

from agents.brand_awareness_agent.graph import run_brand_awareness_workflow


__all__ = ["run_brand_awareness_workflow"]
