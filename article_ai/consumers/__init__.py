from .analysis import ArticleAnalysis, analyze_article, parse_analysis
from .chat import ChatTurn, chat_with_article
from .related import describe_related_articles
from .summarization import Summary, summarize_article, truncated_summary

__all__ = [
    "ArticleAnalysis",
    "ChatTurn",
    "Summary",
    "analyze_article",
    "chat_with_article",
    "describe_related_articles",
    "parse_analysis",
    "summarize_article",
    "truncated_summary"
]
