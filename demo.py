from time import sleep, perf_counter

import underbar as _
from underbar import LibrarySettings

_.configure_logging(LibrarySettings(log_level="DEBUG"))


def expensive_square(x):
    # Simulate a costly step so memoization is visible
    print(f"  computing square({x}) ...")
    sleep(0.2)
    return x * x


print("\n--- Demo: iteration over sequences and mappings ---")
_.each([10, 20, 30], lambda value, index: print(f"  [{index}] = {value}"))
_.each({'a': 1, 'b': 2}, lambda value, key: print(f"  {key!r} -> {value}"))
print("Sum:", _.reduce([1, 2, 3, 4], lambda acc, x: acc + x))
print("Odd/even representatives:", _.uniq([1, 2, 1, 3, 2], False, lambda x: x % 2))
print()

print("--- Demo: collection algebra ---")
print("zip:", _.zip(['a', 'b', 'c', 'd'], [1, 2, 3]))
print("flatten:", _.flatten([1, [2], [3, [[4]]]]))
print("flatten (shallow):", _.flatten([1, [2], [3, [[4]]]], True))
print("intersection:", _.intersection([1, 2, 3], [2, 3, 4], [2, 5]))
people = [{'name': 'moe', 'age': 40}, {'name': 'larry', 'age': 50}, {'name': 'curly', 'age': 30}]
print("sort_by age:", _.pluck(_.sort_by(people, 'age'), 'name'))
print("chain:", _.chain(range(10)).filter(lambda x: x % 2 == 0).map(lambda x: x * x).value())
print()

print("--- Demo: memoize (second pass reuses results) ---")
square = _.memoize(expensive_square)
t0 = perf_counter()
first_pass = [square(n) for n in (2, 3, 4)]
t1 = perf_counter()
second_pass = [square(n) for n in (2, 3, 4)]
t2 = perf_counter()
print(f"First pass {first_pass}: {t1 - t0:.2f}s; second pass {second_pass}: {t2 - t1:.4f}s")
print("cache_info (hits, misses, size):", square.cache_info())
print()

print("--- Demo: throttle (leading + trailing edge) ---")
calls = []
throttled = _.throttle(lambda n: calls.append(n), 100)
for n in range(10):
    throttled(n)
    sleep(0.005)
sleep(0.2)
print(f"10 calls in ~50ms produced {len(calls)} real calls: {calls}")
print()

print("--- Demo: delay ---")
_.delay(print, 50, "  delayed hello", "after ~50ms")
print("delay() returned immediately")
sleep(0.1)
