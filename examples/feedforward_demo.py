#!/usr/bin/env python3
"""
Feed-forward Network Demo

Trains a tiny 2-3-1 sigmoid network on XOR using nothing but Matrix
arithmetic: weighted sums, activations and the backpropagated gradients.
"""

import sys
import os
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import numpy as np
from nnmatrix import Matrix, configure_logging, get_profiler

LEARNING_RATE = 2.0
EPOCHS = 5000
REPORT_EVERY = 1000

logger = configure_logging(level="INFO")
profiler = get_profiler()
profiler.enable()

samples = [
    (Matrix.of_column(0.0, 0.0), Matrix.of_column(0.0)),
    (Matrix.of_column(0.0, 1.0), Matrix.of_column(1.0)),
    (Matrix.of_column(1.0, 0.0), Matrix.of_column(1.0)),
    (Matrix.of_column(1.0, 1.0), Matrix.of_column(0.0)),
]

rng = np.random.default_rng(42)
parameters = {
    "hidden_weights": Matrix(3, 2).fill_gaussian(rng),
    "hidden_biases": Matrix(3, 1).fill_gaussian(rng),
    "output_weights": Matrix(1, 3).fill_gaussian(rng),
    "output_biases": Matrix(1, 1).fill_gaussian(rng),
}


def predict(x):
    hidden_a = (parameters["hidden_weights"] @ x + parameters["hidden_biases"]).scale_sigmoid()
    return (parameters["output_weights"] @ hidden_a + parameters["output_biases"]).scale_sigmoid()


@profiler.profile_decorator("train_step")
def train_step(x, y):
    """Run one forward/backward pass on a single sample and return its cost."""
    # Forward pass
    hidden_z = parameters["hidden_weights"] @ x + parameters["hidden_biases"]
    hidden_a = hidden_z.scale_sigmoid()
    output_z = parameters["output_weights"] @ hidden_a + parameters["output_biases"]
    output_a = output_z.scale_sigmoid()

    error = output_a - y

    # Backward pass
    output_delta = error.times(output_z.scale_sigmoid_prime())
    hidden_delta = (parameters["output_weights"].transpose() @ output_delta).times(
        hidden_z.scale_sigmoid_prime()
    )

    parameters["output_weights"] -= (output_delta @ hidden_a.transpose()).scale(LEARNING_RATE)
    parameters["output_biases"] -= output_delta.scale(LEARNING_RATE)
    parameters["hidden_weights"] -= (hidden_delta @ x.transpose()).scale(LEARNING_RATE)
    parameters["hidden_biases"] -= hidden_delta.scale(LEARNING_RATE)

    return sum(error.square().column(0)) / 2


for epoch in range(EPOCHS):
    cost = sum(train_step(x, y) for x, y in samples)

    if epoch % REPORT_EVERY == 0:
        step_stats = profiler.get_summary()["train_step"]
        logger.info("epoch %d cost %.6f (%d steps, mean %.6fs)",
                    epoch, cost, step_stats["count"], step_stats["mean"])
        # Entries grow with every profiled call; start each reporting window afresh
        profiler.reset()

print("\nHidden weights:")
print(parameters["hidden_weights"])

print("Predictions:")
for x, y in samples:
    prediction = predict(x)
    print(f"  {x.transpose().to_tsv().strip()} -> {prediction[0, 0]:.3f} (expected {y[0, 0]:.0f})")

profiler.disable()
