import time

from tqdm import tqdm

from kartsim.vector_env import make_vector_env


def benchmark_vector_env(count: int, steps: int = 1000) -> float:
    env = make_vector_env(count)
    obs, info = env.reset(seed=0)
    pbar = tqdm(total=steps, desc=f"{count} envs", leave=False)
    start = time.perf_counter()
    for _ in range(steps):
        actions = env.action_space.sample()
        obs, rewards, terminated, truncated, info = env.step(actions)
        pbar.update(1)
    elapsed = time.perf_counter() - start
    pbar.close()
    env.close()
    return steps / elapsed


for count in range(1, 9):
    steps_per_second = benchmark_vector_env(count, steps=1200)
    hz_per_env = steps_per_second / count
    realtime_factor = hz_per_env / 60.0
    print(
        f"{count:2d} envs → {steps_per_second:8.1f} steps/sec "
        f"({hz_per_env:6.1f} Hz per env, {realtime_factor:5.1f}x real time)"
    )
