from driftsketch import MotionStrategy, run_particles

if __name__ == "__main__":
    run_particles(
        n=2000,
        canvas_size=(2048, 1400),
        strategy=MotionStrategy.COHERENT_NOISE,
        seed=7,
    )
