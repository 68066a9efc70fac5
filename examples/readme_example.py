from dataclasses import dataclass, field

from conjugate import C, component, own_keys


@dataclass
class Inventory:
    items: list[str] = field(default_factory=list)

    def add(self, item: str) -> None:
        self.items.append(item)

    def describe(self) -> str:
        return f"{len(self.items)} items"


class Named:
    def __init__(self, name: str):
        self.name = name

    def describe(self) -> str:
        return f"named {self.name}"

    def greet(self) -> str:
        return f"Hello from {self.name}"


class Counter:
    count = 0

    def bump(self) -> int:
        self.count += 1
        return self.count


class Player(C(Inventory, Named, Counter)):
    """Composite with its own constructor and an overriding method."""

    def __init__(self, name: str):
        super().__init__((), (name,))

    def describe(self) -> str:
        return f"{self.name} carrying {component(self, Inventory).describe()}"


def main() -> None:
    player = Player("ada")
    player.add("lamp")
    player.add("rope")

    print(player.describe())  # subclass member wins
    print(player.greet())  # method from the Named component, bound to player
    print(player.bump(), player.bump())  # count shadowed on the Counter instance
    print(own_keys(player))
    print(player)


if __name__ == "__main__":
    main()

