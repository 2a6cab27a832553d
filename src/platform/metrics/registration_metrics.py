from prometheus_client import Counter, Histogram


class RegistrationMetrics:
    """
    Registration flow metrics

    Tracks how long callers wait for read models to catch up with the
    commands they sent, and how the saga classifies orders.
    """

    def __init__(self) -> None:
        # ========== Read-after-write polling ==========
        self.read_model_polls = Counter(
            'read_model_polls_total',
            'Read-after-write polls by outcome',
            ['read_model', 'result'],  # result: hit/timeout
        )

        self.read_model_poll_attempts = Histogram(
            'read_model_poll_attempts',
            'Lookups performed per poll',
            ['read_model'],
            buckets=[1, 2, 3, 5, 8, 13, 21],
        )

        self.read_model_poll_duration = Histogram(
            'read_model_poll_duration_seconds',
            'Time spent waiting for a read model',
            ['read_model', 'result'],
            buckets=[0.01, 0.05, 0.1, 0.3, 0.5, 1.0, 2.0, 5.0, 10.0],
        )

        # ========== Saga outcomes ==========
        self.registration_outcomes = Counter(
            'registration_outcomes_total',
            'Registration saga outcomes by step',
            ['step', 'outcome'],
        )

        self.commands_dispatched = Counter(
            'registration_commands_dispatched_total',
            'Commands handed to the command bus',
            ['command_type'],
        )

    def record_poll(
        self, *, read_model: str, hit: bool, attempts: int, duration_seconds: float
    ) -> None:
        result = 'hit' if hit else 'timeout'
        self.read_model_polls.labels(read_model=read_model, result=result).inc()
        self.read_model_poll_attempts.labels(read_model=read_model).observe(attempts)
        self.read_model_poll_duration.labels(read_model=read_model, result=result).observe(
            duration_seconds
        )

    def record_outcome(self, *, step: str, outcome: str) -> None:
        self.registration_outcomes.labels(step=step, outcome=outcome).inc()

    def record_command(self, *, command_type: str) -> None:
        self.commands_dispatched.labels(command_type=command_type).inc()


# Global metrics instance
metrics = RegistrationMetrics()
