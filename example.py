"""Example usage of the jsonmatch assertion builder."""

import json
from jsonmatch import assert_json, Scope

# What the test cares about
expected = {
    "id": "ORD-001",
    "status": "paid",
    "createdAt": "2025-01-01T00:00:00Z",
    "lineItems": [
        {"sku": "GADGET-002", "quantity": 2},
        {"sku": "WIDGET-001", "quantity": 5}
    ],
    "customer": {"name": "Ada", "email": "ada@example.com"}
}

# What the service returned
actual = {
    "id": "ORD-001",
    "status": "paid",
    "createdAt": "2025-02-02T10:30:02Z",  # Dynamic, only the type matters
    "lineItems": [
        {"sku": "WIDGET-001", "quantity": 5, "unitPrice": 10.00},  # Different order
        {"sku": "GADGET-002", "quantity": 2, "unitPrice": 25.50}
    ],
    "customer": {"name": "Ada", "email": "ada@example.com", "password": "hunter2"},
    "traceId": "abc123"  # Not mentioned in expected, allowed
}


def main():
    print("=" * 60)
    print("jsonmatch - Example")
    print("=" * 60)

    builder = assert_json(expected, actual) \
        .any_order("lineItems[*]") \
        .type_match("createdAt") \
        .equal_count("lineItems") \
        .key_must_be_absent("customer.password")

    result = builder.validate_with_result()
    print(f"\nValid: {result.is_valid}")

    if result.failures:
        print(f"\nFailures:")
        for failure in result.failures:
            print(f"  - [{failure.kind.value}] {failure.key_path or '<root>'}")
            print(f"    {failure.message}")

    print("\n" + "-" * 60)
    print("Full JSON Report:")
    print(json.dumps(result.to_dict(), indent=2))

    print("\n" + "-" * 60)
    print("Configuration tree:")
    print(builder.config.describe())

    # Same check with every value compared by type only
    relaxed = assert_json(expected, actual).any_order("lineItems[*]").type_match(scope=Scope.SUBTREE)
    print(f"\nType-only match: {relaxed.check()}")


if __name__ == "__main__":
    main()
