"""Package bases, dependency constraints, dependency pools, checks and ordering."""