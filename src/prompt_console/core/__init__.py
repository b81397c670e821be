# Core package
