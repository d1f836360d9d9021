from driftsketch import run_revolving_circles

if __name__ == "__main__":
    run_revolving_circles(num_circles=8)
