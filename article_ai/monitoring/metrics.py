from prometheus_client import Counter, Histogram

# Define metrics
generation_attempts = Counter(
    'article_ai_generation_attempts_total',
    'Provider calls made by the generation cascade',
    ['provider', 'model', 'outcome']
)

generation_retries = Counter(
    'article_ai_generation_retries_total',
    'Same-candidate retries after a retryable failure',
    ['provider', 'model']
)

generation_results = Counter(
    'article_ai_generation_results_total',
    'Top-level generation results',
    ['result']
)

configuration_errors = Counter(
    'article_ai_configuration_errors_total',
    'Candidates rejected for invalid request or credentials',
    ['provider', 'model', 'kind']
)

generation_latency = Histogram(
    'article_ai_generation_latency_seconds',
    'End-to-end generation latency including retries and fallback',
    ['result'],
    buckets=[0.5, 1.0, 2.0, 5.0, 10.0, 30.0, 60.0, 120.0]
)


def record_attempt(provider: str, model: str, outcome) -> None:
    label = "success" if outcome.ok else outcome.kind.value
    generation_attempts.labels(provider=provider, model=model, outcome=label).inc()


def record_result(result: str, duration: float) -> None:
    generation_results.labels(result=result).inc()
    generation_latency.labels(result=result).observe(duration)
