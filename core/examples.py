"""Core Examples - Starter scripts offered by the practice editor."""

EXAMPLES = {
    "default": """import numpy as np
import pandas as pd
import matplotlib.pyplot as plt

x = np.linspace(0, 10, 100)
y = np.sin(x)

plt.figure(figsize=(10, 6))
plt.plot(x, y, label="sin(x)")
plt.xlabel("X")
plt.ylabel("Y")
plt.title("Simple Plot Example")
plt.legend()
plt.grid(True)
plt.show()

print("X values (first 5):", x[:5])
print("Y values (first 5):", y[:5])""",
    "data": """import pandas as pd

df = pd.DataFrame(
    {
        "Name": ["Alice", "Bob", "Charlie", "Diana"],
        "Age": [25, 30, 35, 28],
        "Score": [85, 90, 88, 92],
    }
)
print("Average Score: {:.2f}".format(df["Score"].mean()))
df""",
    "ml": """from sklearn.datasets import make_classification
from sklearn.ensemble import RandomForestClassifier
from sklearn.metrics import accuracy_score
from sklearn.model_selection import train_test_split

X, y = make_classification(n_samples=1000, n_features=4, n_informative=2, n_redundant=0, random_state=42)
X_train, X_test, y_train, y_test = train_test_split(X, y, test_size=0.2, random_state=42)

model = RandomForestClassifier(n_estimators=100, random_state=42)
model.fit(X_train, y_train)

accuracy = accuracy_score(y_test, model.predict(X_test))
print(f"Model Accuracy: {accuracy:.2f}")""",
    "dl": """from sklearn.datasets import make_classification
from sklearn.metrics import accuracy_score
from sklearn.model_selection import train_test_split
from sklearn.neural_network import MLPClassifier

X, y = make_classification(n_samples=1000, n_features=20, n_informative=15, n_redundant=5, random_state=42)
X_train, X_test, y_train, y_test = train_test_split(X, y, test_size=0.2, random_state=42)

# 128 -> 64 -> 32 hidden units
model = MLPClassifier(hidden_layer_sizes=(128, 64, 32), max_iter=100, random_state=42)
model.fit(X_train, y_train)

print(f"Model Accuracy: {accuracy_score(y_test, model.predict(X_test)):.4f}")""",
    "text": """import json


def process_text(text):
    words = text.split()
    return {"word_count": len(words), "char_count": len(text), "words": words[:5]}


result = process_text("This is a sample text for text processing")
print(json.dumps(result, indent=2))""",
}


def list_examples() -> list[str]:
    """Names of the available starter scripts."""
    return sorted(EXAMPLES)


def get_example(name: str) -> str:
    """Return the starter script for name.

    Raises:
        KeyError: If no example has that name.
    """
    return EXAMPLES[name]
