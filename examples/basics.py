from reactive_structures import (
    ObservableObject,
    ObservableSequence,
    any_change,
    apply_change,
    element_changes,
    observable_property,
)

# ------------------------------------------------------------------------------------------------

print()
print("=" * 100)
print("Observing structural changes")
print("-" * 100)
print()

# Every mutation publishes the change events that describe it.
names = ObservableSequence(["stuff", "things"], name="names")
subscription = names.changed.subscribe(lambda event: print(f"Event: {event}"))

names.append("item")  # Added([2, 3), ['item'])
names.insert(0, "first")  # Added([0, 1), ['first'])
names.append_all(["x", "y"])  # One event for the whole batch
names[1] = "other"  # Removed then Added at the same index
names.replace_range(0, 2, ["p", "q", "r"])  # Removed([0, 2)) then Added([0, 3))
names.remove_all()  # One Removed covering everything
names.remove_all()  # Already empty: nothing is published

subscription.dispose()
names.append("silent")  # No longer observed

# ------------------------------------------------------------------------------------------------

print()
print("=" * 100)
print("Mirroring a sequence from its events")
print("-" * 100)
print()

# A consumer can keep a copy in sync without ever re-reading the sequence.
mirror = names.to_list()
names.changed.subscribe(lambda event: apply_change(mirror, event))

names.append_all(["a", "b", "c"])
names[0:2] = ["z"]
del names[-1]
print(f"Sequence: {names.to_list()}")
print(f"Mirror:   {mirror}")

# ------------------------------------------------------------------------------------------------

print()
print("=" * 100)
print("Observing element changes")
print("-" * 100)
print()


# Elements opt in by exposing property_changed; observable_property does it for you.
class Person(ObservableObject):
    name = observable_property("")
    age = observable_property(0)

    def __init__(self, name, age):
        super().__init__()
        self.name = name
        self.age = age

    def __repr__(self):
        return f"({self.name}, {self.age})"


arthur = Person("Arthur", 20)
bob = Person("Bob", 20)
people = ObservableSequence([arthur], name="people")

element_changes(people).subscribe(
    lambda change: print(f"Element changed: {change.element}.{change.property}")
)

arthur.name = "Alec"  # (Alec, 20).name
people.append(bob)  # Bob is tracked from now on
bob.age = 30  # (Bob, 30).age
people.remove(bob)
bob.age = 31  # Bob left the sequence, nothing is reported

# ------------------------------------------------------------------------------------------------

print()
print("=" * 100)
print("Reacting to any change")
print("-" * 100)
print()

# One signal per structural event and one per element change.
renders = any_change(people).subscribe(
    lambda _: print(f"Render: {[person.name for person in people]}")
)

people.append(Person("Carol", 41))
arthur.name = "Arthur"

renders.dispose()

# Closing the sequence completes every stream built on it.
people.changed.subscribe(on_completed=lambda: print("people closed"))
people.close()
